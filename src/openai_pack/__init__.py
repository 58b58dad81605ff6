"""
OpenAI formula pack.

Provides:
- Request routing between the legacy completion and chat completion endpoints
- A catalog of prompt formulas (Q&A, summarize, keywords, sentiment, ...)
- Image generation with named styles
- FastAPI and CLI surfaces for calling formulas
"""
