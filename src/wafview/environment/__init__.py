"""wafview environment: configuration, loaders and errors."""

from wafview.environment.exceptions import (
    ErrorCode,
    OrphanContentWarning,
    SourceSnippet,
    TemplateCycleError,
    TemplateError,
    TemplateNotFoundError,
    TemplateRenderError,
    TemplateSyntaxError,
    TemplateTooDeepError,
    UndefinedError,
    build_source_snippet,
)
from wafview.environment.loaders import (
    ChoiceLoader,
    DictLoader,
    FileSystemLoader,
    FunctionLoader,
    Loader,
)
from wafview.environment.core import DEFAULT_GLOBALS, Environment

__all__ = [
    "DEFAULT_GLOBALS",
    "ChoiceLoader",
    "DictLoader",
    "Environment",
    "ErrorCode",
    "FileSystemLoader",
    "FunctionLoader",
    "Loader",
    "OrphanContentWarning",
    "SourceSnippet",
    "TemplateCycleError",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateRenderError",
    "TemplateSyntaxError",
    "TemplateTooDeepError",
    "UndefinedError",
    "build_source_snippet",
]
