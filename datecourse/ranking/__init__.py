"""
Image ranking layer.

Responsibilities:
- Normalise search results into Candidate values.
- Score image candidates on resolution, aspect ratio and URL scheme.
- Pick the best representative image, skipping denylisted domains when possible.
"""
