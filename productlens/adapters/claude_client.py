"""
Claude API Client for product summaries.
Provides an async interface to Claude for summarizing the products found on a page.

DESIGN PRINCIPLES:
- Summaries describe only the products given in the input
- Never invent products, brands or prices
- Temperature=0 for deterministic output
"""
from typing import Optional
import anthropic

from productlens.config import config
from productlens.utils.logger import LayerLogger


SYSTEM_PROMPT = """You are an AI assistant designed to provide concise summaries of product offerings from a given website.

ABSOLUTE RULES:
• Only describe products that appear in the provided product details
• Never invent products, brands, prices or availability
• Never use external knowledge about the website
• Keep the summary to a few sentences"""


class ClaudeClient:
    """
    Claude API client for product summaries.

    Unavailable (not an error) when no API key is configured.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        timeout: Optional[int] = None,
    ):
        self.logger = LayerLogger("claude_client")
        self.model = model or config.SUMMARY_MODEL
        self.max_tokens = max_tokens or config.SUMMARY_MAX_TOKENS
        api_key = api_key or config.CLAUDE_API_KEY

        if not api_key:
            self.logger.log_action("init", "skipped", reason="CLAUDE_API_KEY not set")
            self.client = None
        else:
            self.client = anthropic.AsyncAnthropic(
                api_key=api_key,
                timeout=timeout or config.SUMMARY_TIMEOUT,
                max_retries=0,
            )
            self.logger.log_action("init", "completed", model=self.model)

    def is_available(self) -> bool:
        """Check if Claude client is properly configured."""
        return self.client is not None

    @staticmethod
    def build_prompt(url: str, product_details: str, search_term: Optional[str] = None) -> str:
        """User prompt asking for product types and price ranges."""
        focus = ""
        if search_term:
            focus = f'Focus your summary on products related to the term: "{search_term}".\n'
        return (
            "Based on the product details extracted from the URL, create a summary that "
            "includes the types of products found and their general price ranges.\n"
            f"{focus}"
            f"URL: {url}\n"
            f"Product Details: {product_details}\n"
            "Summary:"
        )

    async def summarize(
        self,
        url: str,
        product_details: str,
        search_term: Optional[str] = None,
    ) -> Optional[str]:
        """
        Summarize the products found on a page.

        Args:
            url: Page the products came from
            product_details: One product per line
            search_term: Optional focus for the summary

        Returns:
            The summary text, or None if unavailable or the call failed
        """
        if not self.client or not product_details:
            return None

        try:
            self.logger.log_action(
                "summarize",
                "started",
                url=url,
                details_length=len(product_details),
                search_term=search_term,
            )

            response = await self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=0,
                system=SYSTEM_PROMPT,
                messages=[{
                    "role": "user",
                    "content": self.build_prompt(url, product_details, search_term),
                }]
            )

            text = "".join(
                block.text for block in response.content if getattr(block, "type", "") == "text"
            ).strip()

            if not text:
                self.logger.log_action("summarize", "rejected", reason="empty_response")
                return None

            self.logger.log_action(
                "summarize",
                "success",
                summary_length=len(text),
                tokens=response.usage.input_tokens + response.usage.output_tokens
            )
            return text

        except anthropic.APIError as e:
            self.logger.log_error(f"Claude API error: {str(e)}", error_type="api_error", url=url)
            return None
