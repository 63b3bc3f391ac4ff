"""
Driver Factory - Chrome WebDriver creation for live pages.
"""

from typing import Optional
import logging

from selenium import webdriver
from selenium.webdriver.chrome.options import Options as ChromeOptions

logger = logging.getLogger(__name__)

WebDriverType = webdriver.Chrome


def create_driver(
    headless: bool = False,
    profile_path: Optional[str] = None,
    page_load_timeout: int = 30,
    window_size: str = "1280,720",
) -> WebDriverType:
    """
    Create a Chrome WebDriver.

    Args:
        headless: Run browser in headless mode
        profile_path: Path to a browser profile for session persistence
        page_load_timeout: Seconds ``driver.get`` may block
        window_size: Initial ``width,height`` of the window

    Example:
        >>> driver = create_driver(headless=True)
        >>> driver.get("https://example.com/quiz")
    """
    options = ChromeOptions()

    if headless:
        options.add_argument("--headless=new")

    if profile_path:
        options.add_argument(f"--user-data-dir={profile_path}")

    options.add_argument(f"--window-size={window_size}")
    options.add_argument("--disable-extensions")
    options.add_argument("--no-sandbox")
    options.add_argument("--disable-dev-shm-usage")
    options.add_argument("--disable-gpu")

    driver = webdriver.Chrome(options=options)
    driver.set_page_load_timeout(page_load_timeout)
    logger.debug("Chrome started (headless=%s)", headless)
    return driver
