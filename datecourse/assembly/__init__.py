"""
Course assembly layer.

Responsibilities:
- Fan out one place search per category and collect candidate pools.
- Filter pools by deny-name and per-category name patterns without emptying them.
- Sample one candidate per category from the top of each pool into an ordered course.
"""
