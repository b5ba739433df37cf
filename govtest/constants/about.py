"""Static metadata describing GovTest AI."""

APP_NAME = "GovTest AI"
APP_VERSION = "0.1"
