"""
Manages Playwright browser instances for board rasterization.

This module provides the `PlaywrightManager` class, an asynchronous context manager
that launches a headless browser, loads a board document and captures it as a PNG.
It integrates with the application's configuration system to determine the
browser type.
"""
from playwright.async_api import async_playwright, Playwright, Browser, Page
from typing import Optional, TYPE_CHECKING

from contributor_board.core.exceptions import RendererError
from contributor_board.core.logger import get_logger

if TYPE_CHECKING:
    from contributor_board.core.config import ConfigurationManager

logger = get_logger(__name__)

SUPPORTED_BROWSERS = ('chromium', 'firefox', 'webkit')


class PlaywrightManager:
    """
    Asynchronous context manager for Playwright browser instances.

    This class handles the lifecycle of Playwright, including starting the
    Playwright engine, launching a browser instance (Chromium, Firefox, or WebKit),
    and ensuring resources are properly closed upon exit.

    Attributes:
        browser_type (str): The type of browser to launch (e.g., 'chromium').
        render_timeout (int): Milliseconds allowed for loading content and capturing it.
        playwright (Optional[Playwright]): The Playwright engine instance.
        browser (Optional[Browser]): The launched Playwright browser instance.
    """
    DEFAULT_BROWSER_TYPE = 'chromium'
    DEFAULT_RENDER_TIMEOUT = 30000  # Milliseconds

    def __init__(self, config: Optional['ConfigurationManager'] = None):
        """
        Initializes the PlaywrightManager.

        Args:
            config (Optional[ConfigurationManager]): Source of
                `components.playwright_manager.browser_type` and `render_timeout_ms`.
                If None, defaults will be used.

        Raises:
            RendererError: If an unsupported browser type is configured.
        """
        if config:
            self.browser_type = config.get('components.playwright_manager.browser_type', self.DEFAULT_BROWSER_TYPE)
            self.render_timeout = int(config.get('components.playwright_manager.render_timeout_ms', self.DEFAULT_RENDER_TIMEOUT))
        else:
            self.browser_type = self.DEFAULT_BROWSER_TYPE
            self.render_timeout = self.DEFAULT_RENDER_TIMEOUT

        logger.info(f"PlaywrightManager configured to use browser: {self.browser_type}")

        if self.browser_type not in SUPPORTED_BROWSERS:
            logger.error(f"Unsupported browser type configured: {self.browser_type}")
            raise RendererError(f"Unsupported browser type: {self.browser_type}. Must be 'chromium', 'firefox', or 'webkit'.")

        self.playwright: Optional[Playwright] = None
        self.browser: Optional[Browser] = None

    async def __aenter__(self) -> 'PlaywrightManager':
        """
        Initializes the Playwright engine and launches the configured browser.

        Returns:
            PlaywrightManager: The instance of itself.

        Raises:
            RendererError: If Playwright fails to start or the browser fails to launch.
                           This can happen if browser binaries are not installed.
        """
        logger.debug(f"Entering PlaywrightManager context: Starting Playwright and launching {self.browser_type} browser.")
        try:
            self.playwright = await async_playwright().start()
            browser_launcher = getattr(self.playwright, self.browser_type)
            self.browser = await browser_launcher.launch()
            logger.info(f"{self.browser_type} browser launched successfully.")
        except Exception as e:
            logger.error(f"Failed to initialize Playwright or launch browser {self.browser_type}: {e}", exc_info=True)
            if self.playwright:
                try:
                    await self.playwright.stop()
                except Exception as stop_e:
                    logger.error(f"Error stopping Playwright during __aenter__ cleanup: {stop_e}", exc_info=True)
                self.playwright = None
            raise RendererError(f"Failed to initialize Playwright or launch browser {self.browser_type}: {e}")
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """
        Closes the browser and stops the Playwright engine.
        """
        logger.debug("Exiting PlaywrightManager context: Closing browser and stopping Playwright.")
        if self.browser:
            try:
                await self.browser.close()
                logger.info("Browser closed successfully.")
            except Exception as e:
                logger.error(f"Error closing browser: {e}", exc_info=True)
        if self.playwright:
            try:
                await self.playwright.stop()
                logger.info("Playwright stopped successfully.")
            except Exception as e:
                logger.error(f"Error stopping Playwright: {e}", exc_info=True)

        self.browser = None
        self.playwright = None

    async def render_html_to_png(
        self,
        html: str,
        width: int = 1080,
        height: int = 1350,
        device_scale_factor: float = 2,
    ) -> bytes:
        """
        Loads an HTML document into a fixed-size viewport and captures it.

        Args:
            html (str): The complete document to render.
            width (int): Viewport width in CSS pixels.
            height (int): Viewport height in CSS pixels.
            device_scale_factor (float): Pixel ratio; the PNG is width*factor by height*factor.

        Returns:
            bytes: The PNG image.

        Raises:
            RendererError: If the browser is not initialized, or loading or capture fails.
        """
        if not self.browser:
            logger.error("render_html_to_png called but browser is not initialized.")
            raise RendererError("Browser is not initialized. Ensure PlaywrightManager is used within an 'async with' statement.")

        page: Optional[Page] = None
        logger.debug(f"Rendering {len(html)} characters of HTML at {width}x{height} (scale {device_scale_factor}).")
        try:
            page = await self.browser.new_page(
                viewport={'width': width, 'height': height},
                device_scale_factor=device_scale_factor,
            )
            # 'networkidle' lets embedded images finish loading before capture.
            await page.set_content(html, wait_until='networkidle', timeout=self.render_timeout)
            image = await page.screenshot(
                type='png',
                clip={'x': 0, 'y': 0, 'width': width, 'height': height},
                timeout=self.render_timeout,
            )
            logger.info(f"Rendered board image ({len(image)} bytes).")
            return image
        except Exception as e:
            logger.error(f"Failed to render board HTML: {e}", exc_info=True)
            raise RendererError(f"Failed to render board image: {e}")
        finally:
            if page:
                try:
                    await page.close()
                except Exception as e:
                    logger.error(f"Error closing render page: {e}", exc_info=True)
