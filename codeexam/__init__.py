"""
Code Exam - Client Package

This package contains the core components of the exam session controller:
- models: Data structures for problems, sessions and score records
- persistence: Saved session state surviving restarts
- reconciler: Remote-authoritative completed problems
- evaluator: Sequential test case evaluation
- recorder: Score increments for passing submissions
- ranking: Leaderboard and results ordering
"""

__version__ = "1.0.0"
