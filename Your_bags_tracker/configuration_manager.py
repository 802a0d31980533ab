# configuration_manager.py
import yaml
import os
from typing import Dict, Any, Optional
from Your_bags_tracker.globals import user_data_path


DEFAULT_API_BASE_URL = "https://api.coingecko.com/api/v3"
DEFAULT_STORAGE_KEY = "yourBags"
DEFAULT_LOGO_URL_TEMPLATE = "https://coinicons-api.vercel.app/api/icon/{symbol}"


class ConfigurationError(Exception):
    """Base exception for configuration-related errors."""

    pass


class ConfigurationFileNotFoundError(ConfigurationError):
    """Raised when configuration file is not found."""

    pass


class ConfigurationLoadError(ConfigurationError):
    """Raised when configuration file cannot be loaded or parsed."""

    pass


class CredentialsError(ConfigurationError):
    """Base exception for credentials-related errors."""

    pass


class CredentialsLoadError(CredentialsError):
    """Raised when credentials file cannot be loaded or parsed."""

    pass


class ConfigurationManager:
    """
    Manages configuration loading and validation for the portfolio tracker.
    """

    def __init__(self, config_file: str, creds_file: Optional[str] = None):
        """
        Initialize configuration manager with file paths.

        Args:
            config_file (str): Path to configuration YAML file
            creds_file (str): Optional path to credentials YAML file

        Raises:
            ConfigurationFileNotFoundError: When config file doesn't exist
            ConfigurationLoadError: When config file cannot be loaded
            CredentialsLoadError: When an existing credentials file cannot be loaded
        """
        self.config_file = config_file
        self.creds_file = creds_file
        self.config_data = None
        self.credentials = {}

        self._load_configuration()
        self._load_credentials()

    def _load_configuration(self):
        """
        Load tracker configuration from YAML file.

        Raises:
            ConfigurationFileNotFoundError: When config file doesn't exist
            ConfigurationLoadError: When config file cannot be parsed
        """
        try:
            if not os.path.exists(self.config_file):
                raise ConfigurationFileNotFoundError(
                    f"Configuration file not found: {self.config_file}. Please create the file or check the path."
                )

            with open(self.config_file, "r", encoding="utf-8") as file:
                self.config_data = yaml.safe_load(file)

            if self.config_data is None:
                raise ConfigurationLoadError(
                    f"Configuration file is empty or invalid: {self.config_file}"
                )

            if not isinstance(self.config_data, dict):
                raise ConfigurationLoadError(
                    f"Invalid configuration format in {self.config_file}. Expected dictionary structure."
                )

        except ConfigurationError:
            raise

        except yaml.YAMLError as e:
            raise ConfigurationLoadError(
                f"Invalid YAML syntax in configuration file {self.config_file}: {e}"
            ) from e

        except OSError as e:
            raise ConfigurationLoadError(
                f"OS error reading configuration file {self.config_file}: {e}"
            ) from e

    def _load_credentials(self):
        """
        Load the optional CoinGecko API key file.

        A missing credentials file is fine, the public API works without a key.

        Raises:
            CredentialsLoadError: When credentials file exists but cannot be parsed
        """
        if not self.creds_file or not os.path.exists(self.creds_file):
            return

        try:
            with open(self.creds_file, "r", encoding="utf-8") as file:
                credentials = yaml.safe_load(file)

        except yaml.YAMLError as e:
            raise CredentialsLoadError(
                f"Invalid YAML syntax in credentials file {self.creds_file}: {e}"
            ) from e

        except OSError as e:
            raise CredentialsLoadError(
                f"OS error reading credentials file {self.creds_file}: {e}"
            ) from e

        if credentials is None:
            return
        if not isinstance(credentials, dict):
            raise CredentialsLoadError(
                f"Invalid credentials format in {self.creds_file}. Expected dictionary structure."
            )
        self.credentials = credentials

    def _get_section(self, name: str) -> Dict[str, Any]:
        section = self.config_data.get(name) or {}
        if not isinstance(section, dict):
            raise ConfigurationError(
                f"Invalid '{name}' format. Expected dictionary structure."
            )
        return section

    def get_api_options(self) -> Dict[str, Any]:
        """
        Get price service options.

        Returns:
            Dict[str, Any]: API_BASE_URL, REQUEST_TIMEOUT and INCLUDE_24HR_CHANGE
        """
        options = self._get_section("api_options")
        timeout = options.get("REQUEST_TIMEOUT")
        if timeout is not None:
            try:
                timeout = float(timeout)
            except (TypeError, ValueError) as e:
                raise ConfigurationError(
                    f"Invalid REQUEST_TIMEOUT value: {timeout!r}"
                ) from e
        return {
            "API_BASE_URL": options.get("API_BASE_URL", DEFAULT_API_BASE_URL),
            "REQUEST_TIMEOUT": timeout,
            "INCLUDE_24HR_CHANGE": bool(options.get("INCLUDE_24HR_CHANGE", True)),
        }

    def get_search_options(self) -> Dict[str, Any]:
        options = self._get_section("search_options")
        return {
            "MIN_QUERY_LENGTH": int(options.get("MIN_QUERY_LENGTH", 2)),
            "MAX_SUGGESTIONS": int(options.get("MAX_SUGGESTIONS", 10)),
        }

    def get_display_options(self) -> Dict[str, Any]:
        options = self._get_section("display_options")
        return {
            "LOGO_URL_TEMPLATE": options.get(
                "LOGO_URL_TEMPLATE", DEFAULT_LOGO_URL_TEMPLATE
            ),
            "FETCH_LOGOS": bool(options.get("FETCH_LOGOS", False)),
        }

    def get_storage_filename(self) -> str:
        """Get the local storage filename from configuration."""
        options = self._get_section("data_options")
        storage_filename = options.get("STORAGE_FILE_NAME", "local_storage.json")
        return f"{os.path.dirname(self.config_file) or user_data_path}/{storage_filename}"

    def get_storage_key(self) -> str:
        options = self._get_section("data_options")
        return options.get("STORAGE_KEY", DEFAULT_STORAGE_KEY)

    def get_api_key(self) -> Optional[str]:
        """
        Get the CoinGecko demo API key.

        Returns:
            Optional[str]: API key, or None when no key is configured

        Raises:
            CredentialsError: When the key is present but not a string
        """
        coingecko_creds = self.credentials.get("coingecko") or {}
        api_key = coingecko_creds.get("COINGECKO_API_KEY")
        if api_key is None:
            return None
        if not isinstance(api_key, str):
            raise CredentialsError(
                "Invalid 'COINGECKO_API_KEY' in credentials file under 'coingecko' section."
            )
        return api_key.strip() or None
