"""Fridge photo analysis: ingredient detection and recipe suggestions."""

from .camera import CameraCapture, CaptureError, FridgeCamera
from .config import FridgeAIConfig, load_config
from .db import HistoryStore, KeyValueStore
from .models import EncodedImage, HistoryEntry, Recipe, ScanRequest, ScanResult
from .parser import parse_response
from .pipeline import AnalysisError, AnalysisPipeline
from .scanner import FridgeScanner
from .vision import VisionBackend, create_backend

__all__ = [
    "FridgeCamera",
    "CameraCapture",
    "CaptureError",
    "EncodedImage",
    "ScanRequest",
    "Recipe",
    "ScanResult",
    "HistoryEntry",
    "parse_response",
    "VisionBackend",
    "create_backend",
    "AnalysisPipeline",
    "AnalysisError",
    "HistoryStore",
    "KeyValueStore",
    "FridgeScanner",
    "FridgeAIConfig",
    "load_config",
]
