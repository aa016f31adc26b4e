# world_impact/__init__.py

"""
World Impact Analyzer.

Fetches a historical figure's Wikipedia biography, summarizes it, scores the
person's impact with a second LLM call, and caches the result.
"""

# No high-level imports are needed here, as components are accessed via their
# specific sub-modules (e.g., world_impact.graph, world_impact.api, world_impact.db).
