"""Human-readable rendering of check results."""

from typing import List

from rich.console import Console

from .models.schemas import (
    AntiBotDetection,
    AuthenticationInfo,
    CheckResult,
    RateLimitInfo,
    RobotsTxtInfo,
)

MAX_DISALLOWED_SHOWN = 5

ANTI_BOT_VENDORS = (
    ("cloudflare", "Cloudflare"),
    ("recaptcha", "reCAPTCHA"),
    ("hcaptcha", "hCaptcha"),
    ("datadome", "DataDome"),
    ("perimeter81", "Perimeter81"),
)


def summarize_result(result: CheckResult) -> str:
    """One-line verdict for a check result."""
    if not result.success:
        return f"Failed to reach page: {result.error}"

    error_count = len(result.console_errors)
    if error_count > 0:
        return f"Page reachable but found {error_count} console error(s)"
    return "Page is reachable and scrapeable"


def render_check_result(result: CheckResult, console: Console) -> None:
    """Print a check result as a readable report."""
    rule = "=" * 80
    console.print()
    console.print(rule)

    if result.success:
        console.print(f"[bold green]SUCCESS[/bold green]: {result.url}")
        console.print(f"   Status Code: {result.status_code}")
        console.print(f"   Title: {result.title}")
        console.print(f"   Load Time: {result.load_time_ms}ms")

        if result.screenshot_path:
            console.print(f"   Screenshot: {result.screenshot_path}")

        if result.console_errors:
            console.print(f"   Console Errors: {len(result.console_errors)}")
            for error in result.console_errors:
                console.print(f"      - {error}", markup=False)
        else:
            console.print("   Console Errors: None")

        if result.detections is not None:
            console.print()
            console.print("[bold]DETECTIONS:[/bold]")
            detections = result.detections
            if detections.rate_limit is not None:
                _print_lines(console, _rate_limit_lines(detections.rate_limit))
            if detections.anti_bot is not None:
                _print_lines(console, _anti_bot_lines(detections.anti_bot))
            if detections.robots_txt is not None:
                _print_lines(console, _robots_txt_lines(detections.robots_txt))
            if detections.authentication is not None:
                _print_lines(console, _authentication_lines(detections.authentication))
    else:
        console.print(f"[bold red]FAILED[/bold red]: {result.url}")
        if result.error:
            console.print(f"   Error: {result.error}", markup=False)
        console.print(f"   Load Time: {result.load_time_ms}ms")

    console.print(rule)
    console.print()


def _print_lines(console: Console, lines: List[str]) -> None:
    for line in lines:
        console.print(line, markup=False)


def _rate_limit_lines(info: RateLimitInfo) -> List[str]:
    if not info.detected:
        return ["   Rate Limiting: Not detected"]

    lines = ["   Rate Limiting: Detected"]
    for label, value in (
        ("Limit", info.limit),
        ("Remaining", info.remaining),
        ("Reset", info.reset),
        ("Retry After", info.retry_after),
    ):
        if value:
            lines.append(f"      - {label}: {value}")
    return lines


def _anti_bot_lines(info: AntiBotDetection) -> List[str]:
    if not info.any_detected:
        return ["   Anti-Bot Measures: None detected"]

    lines = ["   Anti-Bot Measures: Detected"]
    for field, label in ANTI_BOT_VENDORS:
        if getattr(info, field):
            lines.append(f"      - {label}: Yes")
    if info.details:
        lines.append("      Details:")
        lines.extend(f"        * {detail}" for detail in info.details)
    return lines


def _robots_txt_lines(info: RobotsTxtInfo) -> List[str]:
    if not info.exists:
        return ["   robots.txt: Not found"]

    lines = [
        "   robots.txt: Found",
        f"      - Allows Crawling: {'Yes' if info.allows_crawling else 'No'}",
    ]
    if info.crawl_delay:
        lines.append(f"      - Crawl Delay: {info.crawl_delay}s")
    if info.disallowed_paths:
        lines.append("      - Disallowed Paths:")
        lines.extend(f"        * {path}" for path in info.disallowed_paths[:MAX_DISALLOWED_SHOWN])
        hidden = len(info.disallowed_paths) - MAX_DISALLOWED_SHOWN
        if hidden > 0:
            lines.append(f"        * ... and {hidden} more")
    if info.sitemap:
        lines.append(f"      - Sitemap: {info.sitemap}")
    return lines


def _authentication_lines(info: AuthenticationInfo) -> List[str]:
    if not info.required:
        return ["   Authentication: Not required"]

    lines = ["   Authentication: Required"]
    if info.type is not None:
        lines.append(f"      - Type: {info.type.value}")
    if info.login_url:
        lines.append(f"      - Login URL: {info.login_url}")
    if info.indicators:
        lines.append("      - Indicators:")
        lines.extend(f"        * {indicator}" for indicator in info.indicators)
    return lines
