"""
Micronotes Application Package.

- core/: Configuration, logging, exceptions
- schemas/: Note record and write payloads (Pydantic)
- repositories/: Remote `notes` table access over the REST interface
- services/: Client-side note store (ordered collection, guard, delete confirmation)
- tui/: Terminal front end (Textual)
"""

__version__ = "0.1.0"
