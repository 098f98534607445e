from linear_mcp.utils.response_utils import robust_parse_text, text_content

__all__ = ["robust_parse_text", "text_content"]
