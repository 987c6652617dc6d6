from setae.render.artifacts import format_artifact, format_artifacts, render_detail, status_icon
from setae.render.threads import format_messages, format_threads, relative_time

__all__ = [
    "format_artifact",
    "format_artifacts",
    "render_detail",
    "status_icon",
    "format_messages",
    "format_threads",
    "relative_time",
]
