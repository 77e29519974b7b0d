"""Configuration settings for the booking flow."""
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings."""

    # Target site
    base_url: str = "https://www.booking.com"

    # Browser Settings
    headless: bool = False  # Headful mode, the site serves a different page to headless Chrome
    browser_channel: Optional[str] = "chrome"
    viewport_width: int = 1920
    viewport_height: int = 1080
    action_timeout: int = 15000
    navigation_timeout: int = 30000

    # Artifacts (videos, traces, debug screenshots)
    artifacts_dir: str = "artifacts"
    record_video: bool = True
    record_trace: bool = True

    # Element resolution
    resolver_scan_window: int = 5

    # Obstruction handling
    obstruction_poll_attempts: int = 3
    obstruction_poll_delay: int = 500
    obstruction_settle: int = 1000
    obstruction_click_timeout: int = 2000

    # Calendar
    calendar_max_pages: int = 12
    calendar_page_delay: int = 300

    # Tabs
    new_tab_timeout: int = 10000

    # Search results
    results_max_pages: int = 30

    # Readiness probes
    ready_probe_attempts: int = 3
    ready_probe_delay: int = 2000

    # Waits for elements that render late (availability button, date display)
    element_wait_attempts: int = 3
    element_wait_delay: int = 1000

    # Reservation policy
    reserve_fallback_labels: list[str] = ["Book", "Continue", "Next", "Proceed", "Confirm"]
    room_fallback_to_first_available: bool = True

    # Test data
    test_data_dir: str = "excel"
    test_data_file: str = "BookingTestData.xlsx"
    test_data_sheet: str = "TestData"
    stay_length_days: int = 60

    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_prefix = "BOOKING_"
        case_sensitive = False


settings = Settings()
