"""
loftscope: semantic model and editor features for Polyloft (.pf) sources.

loftscope turns Polyloft source text into a structural model, enabling you to:
- List classes, enums, records and interfaces with their members
- Follow inheritance chains and inherited members, cycles included
- Infer variable types and check declared-vs-assigned compatibility
- Resolve imports across files and enforce visibility rules
- Drive completion, hover, go-to-definition and lint

Usage:
    from loftscope.session import AnalysisSession

    session = AnalysisSession(Path("."))
    for diagnostic in session.lint(Path("main.pf")):
        print(diagnostic.line, diagnostic.message)
"""

__version__ = "0.1.0"
