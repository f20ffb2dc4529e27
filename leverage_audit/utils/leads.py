"""
Lead Capture

Pushes a scored respondent into the CRM after a successful scoring run.

Supports:
- Notion database pages (the CRM of record)
- Slack-style webhooks (optional team notification)

Credentials come from the `leads:` section of config.yaml, falling back to
the NOTION_API_KEY / NOTION_DATABASE_ID environment variables.
"""

import logging
import os
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Dict, Mapping, Optional

import requests
import yaml

from leverage_audit.assessment.stages import classify_stage
from leverage_audit.config import PROJECT_ROOT
from leverage_audit.errors import ConfigError, LeadCaptureError

logger = logging.getLogger(__name__)

NOTION_PAGES_URL = 'https://api.notion.com/v1/pages'
NOTION_VERSION = '2022-06-28'
DEFAULT_REVENUE_RANGE = 'NA'
REQUEST_TIMEOUT = 10


@dataclass(frozen=True)
class LeadCapture:
    """What the CRM receives about one respondent."""
    name: str
    email: str
    score: int
    stage_name: str
    stage_emoji: str
    revenue_range: str = DEFAULT_REVENUE_RANGE

    def to_dict(self) -> dict:
        return asdict(self)


def build_lead_capture(answers: Mapping, score: int) -> LeadCapture:
    """
    Build the lead from the reserved answer keys and the final score.

    The stage is classified here, never stored with the result.
    """
    email = str(answers.get('email') or '').strip()
    name = str(answers.get('name') or '').strip() or email.split('@')[0]
    stage = classify_stage(score)

    return LeadCapture(
        name=name,
        email=email,
        score=score,
        stage_name=stage.name,
        stage_emoji=stage.emoji,
        revenue_range=str(answers.get('revenueRange') or '').strip() or DEFAULT_REVENUE_RANGE,
    )


class LeadCaptureManager:
    """
    Manages lead delivery across the configured channels.

    Configuration in config.yaml:
    ```yaml
    leads:
      enabled: true
      notion:
        api_key: "secret_..."      # or NOTION_API_KEY
        database_id: "abc123..."   # or NOTION_DATABASE_ID
      slack_webhook: "https://hooks.slack.com/..."
    ```
    """

    def __init__(self, config: Optional[Dict] = None, config_path: Optional[Path] = None):
        self.config = config if config is not None else self._load_config(config_path)
        self.enabled = self.config.get('enabled', True)

        notion = self.config.get('notion', {}) or {}
        self.notion_api_key = notion.get('api_key') or os.getenv('NOTION_API_KEY')
        self.notion_database_id = notion.get('database_id') or os.getenv('NOTION_DATABASE_ID')
        self.webhook_url = self.config.get('slack_webhook')

    def _load_config(self, config_path: Optional[Path]) -> dict:
        """Load the lead-capture section."""
        if config_path is None:
            config_path = PROJECT_ROOT / 'config' / 'config.yaml'

        if not config_path.exists():
            return {}
        try:
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e
        return data.get('leads', {}) or {}

    @property
    def notion_configured(self) -> bool:
        if bool(self.notion_api_key) != bool(self.notion_database_id):
            missing = 'NOTION_DATABASE_ID' if self.notion_api_key else 'NOTION_API_KEY'
            raise LeadCaptureError(f"Notion lead sink is half configured: {missing} not set")
        return bool(self.notion_api_key)

    def send(self, lead: LeadCapture) -> bool:
        """Send the lead to every configured channel; True if any accepted it."""
        if not self.enabled:
            return False
        if not lead.email:
            logger.info("Lead has no email address; skipping capture")
            return False

        success = False

        if self.notion_configured:
            if self._send_notion(lead):
                success = True

        if self.webhook_url:
            if self._send_webhook(lead):
                success = True

        if not self.notion_configured and not self.webhook_url:
            logger.warning("No lead capture channel configured")

        return success

    def _send_notion(self, lead: LeadCapture) -> bool:
        """Create a page in the leads database."""
        headers = {
            'Authorization': f"Bearer {self.notion_api_key}",
            'Notion-Version': NOTION_VERSION,
            'Content-Type': 'application/json',
        }
        payload = {
            'parent': {'database_id': self.notion_database_id},
            'properties': {
                'Company Name': {'title': [{'text': {'content': lead.name}}]},
                'Status': {'select': {'name': 'Lead'}},
                'Email Address': {'email': lead.email},
                'Current annual revenue range': {'select': {'name': lead.revenue_range}},
            },
        }

        try:
            response = requests.post(NOTION_PAGES_URL, json=payload, headers=headers, timeout=REQUEST_TIMEOUT)
        except requests.RequestException as e:
            logger.error("Notion request failed: %s", e)
            return False

        if response.status_code == 200:
            logger.info("Lead created in Notion for %s", lead.email)
            return True

        code = ''
        try:
            code = response.json().get('code', '')
        except ValueError:
            pass

        if code == 'object_not_found':
            logger.error("Notion database not found. Check NOTION_DATABASE_ID.")
        elif code == 'validation_error':
            logger.error("Notion property mismatch: %s", response.text)
        else:
            logger.error("Notion returned %s: %s", response.status_code, response.text)
        return False

    def _send_webhook(self, lead: LeadCapture) -> bool:
        """Post a short lead summary to a Slack-style webhook."""
        payload = {
            'attachments': [{
                'title': f"{lead.stage_emoji} New Lead: {lead.name}",
                'text': f"Scored {lead.score}/100 ({lead.stage_name})",
                'footer': 'Founder Leverage Assessment',
                'fields': [
                    {'title': 'Email', 'value': lead.email, 'short': True},
                    {'title': 'Revenue', 'value': lead.revenue_range, 'short': True},
                ],
            }]
        }

        try:
            response = requests.post(self.webhook_url, json=payload, timeout=REQUEST_TIMEOUT)
            return response.status_code == 200
        except requests.RequestException as e:
            logger.error("Lead webhook failed: %s", e)
            return False
