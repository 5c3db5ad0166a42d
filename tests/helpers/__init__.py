"""Test helper utilities for rescue match tests."""

from .factories import (
    FailingStore,
    RecordingStore,
    make_bird,
    make_candidate,
    make_dog,
    make_horse,
    make_service_dog,
)

__all__ = [
    "FailingStore",
    "RecordingStore",
    "make_bird",
    "make_candidate",
    "make_dog",
    "make_horse",
    "make_service_dog",
]
