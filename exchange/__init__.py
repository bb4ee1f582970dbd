from .buffer import ExchangeBuffer
from .classifier import PatternMatch, classify, locate
from .config import AppConfig, capture_settings, load_config, save_config
from .contests import Contact, ContestRule, default_contest_rules, get_contest_rule, load_contest_rules
from .editor import ExchangeEditor
from .exchange_patterns import ExchangeTemplates, default_exchange_templates, load_exchange_templates
from .extractors import EXTRACTORS, ContestExtractor, ExchangeData, build_extractor
from .input_loop import (
    CaptureSettings,
    CaptureState,
    Collaborators,
    ExchangeInputLoop,
    ExchangeResult,
    Transition,
    run_exchange_capture,
)
from .locator import get_grid, is_valid_grid_square
from .multipliers import MultiplierTable, parse_multiplier_lines, parse_multiplier_text
from .serial import pad_serial

__all__ = [
    "AppConfig",
    "capture_settings",
    "load_config",
    "save_config",
    "ExchangeBuffer",
    "PatternMatch",
    "classify",
    "locate",
    "Contact",
    "ContestRule",
    "default_contest_rules",
    "get_contest_rule",
    "load_contest_rules",
    "ExchangeEditor",
    "ExchangeTemplates",
    "default_exchange_templates",
    "load_exchange_templates",
    "EXTRACTORS",
    "ContestExtractor",
    "ExchangeData",
    "build_extractor",
    "CaptureSettings",
    "CaptureState",
    "Collaborators",
    "ExchangeInputLoop",
    "ExchangeResult",
    "Transition",
    "run_exchange_capture",
    "get_grid",
    "is_valid_grid_square",
    "MultiplierTable",
    "parse_multiplier_lines",
    "parse_multiplier_text",
    "pad_serial",
]
