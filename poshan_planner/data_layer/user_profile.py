"""User profile loader for loading a consumer profile from YAML."""
import yaml
from pathlib import Path
from typing import Any, Dict

from poshan_planner.data_layer.exceptions import InvalidProfile
from poshan_planner.data_layer.models import ActivityLevel, Gender, Goal, UserProfile


def build_user_profile(data: Dict[str, Any]) -> UserProfile:
    """Build a UserProfile from a plain mapping (YAML document or request body).

    Raises:
        KeyError: If required fields are missing
        InvalidProfile: If an enum field has an unsupported value
    """
    try:
        gender = Gender(str(data["gender"]).lower())
    except ValueError:
        raise InvalidProfile(f"Unsupported gender '{data['gender']}'", "gender", data["gender"])
    try:
        activity = ActivityLevel(str(data.get("activity_level", "moderate")).lower())
    except ValueError:
        raise InvalidProfile(
            f"Unsupported activity level '{data['activity_level']}'",
            "activity_level",
            data["activity_level"],
        )
    try:
        goal = Goal(str(data.get("goal", "maintain")).lower())
    except ValueError:
        raise InvalidProfile(f"Unsupported goal '{data['goal']}'", "goal", data["goal"])

    constraints = data.get("dietary_constraints") or []

    return UserProfile(
        age=int(data["age"]),
        gender=gender,
        weight_kg=float(data["weight_kg"]),
        height_cm=float(data["height_cm"]),
        activity_level=activity,
        goal=goal,
        dietary_constraints=frozenset(str(c).strip().lower() for c in constraints),
    )


class UserProfileLoader:
    """Loader for user profile configuration from YAML."""

    def __init__(self, yaml_path: str):
        """Initialize user profile loader from YAML file.

        Args:
            yaml_path: Path to YAML file containing user profile
        """
        self.yaml_path = Path(yaml_path)

    def load(self) -> UserProfile:
        """Load user profile from YAML file.

        The document may hold the fields at top level or under a ``profile``
        key.

        Returns:
            UserProfile object

        Raises:
            FileNotFoundError: If YAML file doesn't exist
            KeyError: If required fields are missing
            InvalidProfile: If an enum field has an unsupported value
        """
        with open(self.yaml_path, "r") as f:
            data = yaml.safe_load(f) or {}

        if "profile" in data:
            data = data["profile"]

        return build_user_profile(data)
