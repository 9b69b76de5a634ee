"""
Terminal Front End.

Textual application for the notes screen. A thin presentation layer: all
state lives in NoteStore, all persistence in the remote table.
"""
