"""TickerLens core package.

This package contains the extraction-and-valuation pipeline:
- normalizer: pt-BR number parsing
- extractor / fields: ordered fallback selector strategies and field tables
- browser: shared Playwright session with per-request page contexts
- scraper: page-template orchestration for stocks and real-estate funds
- classifier / valuation: threshold rules and valuation estimates
- report / validator: response assembly, result models and data checks
- service / api: analysis entry point and FastAPI surface
- logger / exceptions: loguru setup and the error hierarchy
"""

__version__ = "1.0.0"
