"""JSX template-variable transformer."""

from __future__ import annotations

from typing import Any


__all__ = [
    "TransformArtifacts",
    "TransformConfig",
    "build_language_registry",
    "check_source",
    "dispatch_service",
    "explain_source",
    "transform_file",
    "transform_source",
]


def build_language_registry(*args: Any, **kwargs: Any):
    from jsxtv.main import build_language_registry as _build_language_registry

    return _build_language_registry(*args, **kwargs)


def dispatch_service(*args: Any, **kwargs: Any):
    from jsxtv.service import dispatch as _dispatch

    return _dispatch(*args, **kwargs)


def transform_source(*args: Any, **kwargs: Any):
    from jsxtv.main import transform_source as _transform_source

    return _transform_source(*args, **kwargs)


def transform_file(*args: Any, **kwargs: Any):
    from jsxtv.main import transform_file as _transform_file

    return _transform_file(*args, **kwargs)


def check_source(*args: Any, **kwargs: Any):
    from jsxtv.main import check_source as _check_source

    return _check_source(*args, **kwargs)


def explain_source(*args: Any, **kwargs: Any):
    from jsxtv.main import explain_source as _explain_source

    return _explain_source(*args, **kwargs)


def __getattr__(name: str):
    if name == "TransformArtifacts":
        from jsxtv.main import TransformArtifacts

        return TransformArtifacts
    if name == "TransformConfig":
        from jsxtv.config import TransformConfig

        return TransformConfig
    raise AttributeError(name)
