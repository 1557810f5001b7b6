"""Crop use cases: recommendations, planning, progress and reporting."""

from app.use_cases.crops.planning import CreateCropPlanUseCase, UpdatePlanProgressUseCase
from app.use_cases.crops.recommendations import (
    CropRecommendationsUseCase,
    PesticideRecommendationsUseCase,
)
from app.use_cases.crops.reports import (
    CropCalendarUseCase,
    CropDetailsUseCase,
    CropStatisticsUseCase,
)

__all__ = [
    "CreateCropPlanUseCase",
    "CropCalendarUseCase",
    "CropDetailsUseCase",
    "CropRecommendationsUseCase",
    "CropStatisticsUseCase",
    "PesticideRecommendationsUseCase",
    "UpdatePlanProgressUseCase",
]
