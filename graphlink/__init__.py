"""graphlink — run visual-programming graphs against a live design model.

Public entry points::

    from graphlink.execution import GraphExecutionClient
    from graphlink.inputs import materialize_inputs
    from graphlink.session import ScriptSession
"""

__version__ = "0.1.0"
