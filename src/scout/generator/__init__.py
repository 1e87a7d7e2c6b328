"""Structure generator and printers.

:func:`~scout.generator.builder.generate` turns a validated spec tree into
a :class:`~scout.domain.ast.TypeDefinition`; printers render that tree as
Python source or build it into a live pydantic class.
"""
