"""Domain layer for content_loader.

Contains:
- The Content record and the error hierarchy.
- Providers and provider factories enumerating raw content.
- Decoders, processors and denormalizers forming the load pipeline.
- The ContentManager with its filter/sort engine and property accessor.
"""
