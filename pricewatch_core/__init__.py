"""
pricewatch_core - vendor menu price monitoring

Usage:
    from pricewatch_core import build_services

    services = build_services()
    session = await services.orchestrator.run()
"""

from .app import Services, build_services
from .browser_session import BrowserSession, BrowserSessionError, LiveSession
from .config import Config, config
from .dom_survey import ElementClassifier, SurveyResult
from .extraction import ExtractionError, MenuStructureError, VendorExtractor, VendorMenu, VendorRef
from .schedule_trigger import ScheduleTrigger, build_cron_trigger
from .scheduler_config import ConfigStore, SchedulerConfig, ScheduleSpec, VendorConfig
from .storage import PriceStore
from .update_orchestrator import (
    PriceUpdateResult,
    PriceUpdateSession,
    SessionStatus,
    UpdateAlreadyRunningError,
    UpdateOrchestrator,
)

__all__ = [
    'BrowserSession',
    'BrowserSessionError',
    'Config',
    'ConfigStore',
    'ElementClassifier',
    'ExtractionError',
    'LiveSession',
    'MenuStructureError',
    'PriceStore',
    'PriceUpdateResult',
    'PriceUpdateSession',
    'ScheduleSpec',
    'ScheduleTrigger',
    'SchedulerConfig',
    'Services',
    'SessionStatus',
    'SurveyResult',
    'UpdateAlreadyRunningError',
    'UpdateOrchestrator',
    'VendorConfig',
    'VendorExtractor',
    'VendorMenu',
    'VendorRef',
    'build_cron_trigger',
    'build_services',
    'config',
]

__version__ = '1.0.0'
