"""Provisioning pipelines."""

from ._add_s3_event import AddS3EventOptions, AddS3EventPipeline
from ._base import BasePipeline
from ._context import PipelineContext
from ._create import CreateOptions, CreatePipeline
from ._set_version import SetVersionOptions, SetVersionPipeline

__all__ = [
    "AddS3EventOptions",
    "AddS3EventPipeline",
    "BasePipeline",
    "CreateOptions",
    "CreatePipeline",
    "PipelineContext",
    "SetVersionOptions",
    "SetVersionPipeline",
]
