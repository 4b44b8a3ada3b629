"""Style categories."""

from enum import Enum


class StyleCategory(str, Enum):
    TRADITIONAL = "Traditional"
    WEDDING = "Wedding"
    CASUAL = "Casual"
    CORPORATE = "Corporate"
    EVENING_WEAR = "Evening Wear"
    OTHER = "Other"
