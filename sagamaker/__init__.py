"""Saga Maker - a gamified skill tree for personal growth."""

__version__ = "1.0.0"
__app_id__ = "io.github.sagamaker.SagaMaker"
