"""Outbound integrations: PikaMC panel API and DeepSeek chat completions."""
