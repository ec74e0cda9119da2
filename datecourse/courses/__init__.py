"""
Course service layer.

Responsibilities:
- Hold the Seoul region catalogue used for searches and filtering.
- Store user-authored and saved automatic courses with approval state.
- Generate automatic courses from Kakao place search for a region.
- Turn an LLM course plan into real places and images.
"""
