"""System prompts shipped with Tether."""

from tether.prompts.leads import LEAD_QUALIFIER_PREAMBLE

__all__ = ["LEAD_QUALIFIER_PREAMBLE"]
