"""FastAPI server for the Poshan meal planning engine."""

from typing import Any, Dict, List, Optional

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from poshan_planner.data_layer.exceptions import (
    InvalidPlanRequest,
    InvalidProfile,
    PlanningError,
)
from poshan_planner.data_layer.meal_catalog import MealCatalog
from poshan_planner.data_layer.models import PlanMode, PlanRequest as EnginePlanRequest
from poshan_planner.data_layer.nutrition_db import NutritionDatabase
from poshan_planner.data_layer.user_profile import build_user_profile
from poshan_planner.output.formatters import format_plan_json
from poshan_planner.planning.meal_planner import MealPlanner
from poshan_planner.providers.fallback_provider import FallbackPriceProvider


# None selects the bundled data files.
catalog_path: Optional[str] = None
nutrition_path: Optional[str] = None
prices_path: Optional[str] = None

app = FastAPI(title="Poshan Planner API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Local development
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class PlanRequest(BaseModel):
    age: int
    gender: str
    weight_kg: float
    height_cm: float
    activity_level: str = "moderate"
    goal: str = "maintain"
    dietary_constraints: List[str] = Field(default_factory=list)
    rotation_days: int = 5
    mode: str = PlanMode.FULL_DAY.value
    location: str = "default"
    budget_per_day: Optional[float] = None


def _build_plan_request(request: PlanRequest) -> EnginePlanRequest:
    try:
        mode = PlanMode(request.mode)
    except ValueError:
        raise InvalidPlanRequest(f"Unsupported mode '{request.mode}'", "mode", request.mode)
    return EnginePlanRequest(
        rotation_days=request.rotation_days,
        mode=mode,
        location=request.location,
        budget_per_day=request.budget_per_day,
    )


def _load_catalog() -> MealCatalog:
    return MealCatalog(NutritionDatabase(nutrition_path), catalog_path)


@app.post("/api/plan")
def plan_meals(request: PlanRequest) -> Dict[str, Any]:
    try:
        profile = build_user_profile(request.model_dump())
        plan_request = _build_plan_request(request)

        planner = MealPlanner(_load_catalog(), FallbackPriceProvider(prices_path))
        result = planner.generate(profile, plan_request)
        return format_plan_json(result)
    except (InvalidProfile, InvalidPlanRequest) as exc:
        raise HTTPException(status_code=422, detail=exc.to_dict()) from exc
    except PlanningError as exc:
        raise HTTPException(status_code=500, detail=exc.to_dict()) from exc


@app.get("/api/meal-options")
def list_meal_options() -> List[Dict[str, Any]]:
    try:
        return [
            {
                "id": option.id,
                "name": option.name,
                "slot": option.slot,
                "vegetarian": option.vegetarian,
                "staple": option.staple,
                "pulse": option.pulse,
                "variety": option.variety,
            }
            for option in _load_catalog().all()
        ]
    except PlanningError as exc:
        raise HTTPException(status_code=500, detail=exc.to_dict()) from exc


def run(host: str = "127.0.0.1", port: int = 8000):
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run()
