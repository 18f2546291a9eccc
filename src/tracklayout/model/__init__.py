"""
The MODEL layer contains pure data structures and business logic.
It has NO knowledge of the GUI (Qt) or of pointer interaction.
It deals with Piece geometry, the Project document, BOM and I/O.
"""
