"""
Evaluation suite -- rule matching, validation, conflicts, oracle handling,
engine behavior, and the HTTP/CLI surfaces.

Run evals: pytest evals/ -v
"""
