from fastapi import HTTPException, Request


def get_scraper(request: Request):
    """Dependency to get the ProgramScraper instance."""
    if getattr(request.app.state, "scraper", None) is None:
        raise HTTPException(status_code=503, detail="Program scraper is not available.")
    return request.app.state.scraper


def get_source_locator(request: Request):
    """Dependency to get the SourcePageLocator instance."""
    if getattr(request.app.state, "source_locator", None) is None:
        raise HTTPException(status_code=503, detail="Source page locator is not available.")
    return request.app.state.source_locator
