"""
The ENGINE layer implements the interactive behaviour on top of the model:
view mapping, snapping, selection transforms, undo history and pointer
gestures. Like the model it has no knowledge of Qt.
"""
