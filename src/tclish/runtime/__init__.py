"""
Execution core: values, environments, namespaces, frames, commands and the
interpreter. Import ``interpreter`` and ``runtime`` from their modules; the
frontend depends on ``values`` and must be able to import it on its own.
"""
