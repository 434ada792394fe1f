"""Development helpers: opt-in timing instrumentation and the demo CLI.

:mod:`demo` runs a small Euler-Maruyama loop against the live plot and is
installed as the ``sdeplot-demo`` console script.
"""
