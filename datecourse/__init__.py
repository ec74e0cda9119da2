"""
Date-course recommendation service.

Responsibilities:
- Rank image candidates and pick a representative picture for a place.
- Assemble multi-step date courses from category place searches.
- Serve user-authored courses, likes, recent views and admin approval over HTTP.
"""
