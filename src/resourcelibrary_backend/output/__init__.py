from resourcelibrary_backend.output.renderer import ResourceLibraryRenderer
from resourcelibrary_backend.output.resourcelibrary import (
    ActivityResourceLibrary,
    CourseResourceLibrary,
)

__all__ = [
    "ResourceLibraryRenderer",
    "ActivityResourceLibrary",
    "CourseResourceLibrary",
]
