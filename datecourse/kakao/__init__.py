"""
Kakao search integration.

Responsibilities:
- Manage Kakao REST API configuration and credentials.
- Call the Local keyword search and image search endpoints.
- Map search documents into Candidate values, degrading to empty results.
- Cache the best representative image per query.
"""
