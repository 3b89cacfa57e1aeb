import yaml
import pulumi
from awswordpress import WordpressResourceBuilder
from typing import Any, Dict

def load_config(file_path: str) -> Dict[str, Any]:
    """Load and validate YAML configuration from the given file path."""
    with open(file_path, "r") as file:
        config_data = yaml.safe_load(file) or {}

    # Ensure required keys exist
    required_keys = ["identifier"]
    for key in required_keys:
        if not config_data.get(key):
            raise ValueError(f"Missing required configuration key: {key}")

    config_data.setdefault("region", "us-east-1")
    config_data.setdefault("tags", {})
    config_data.setdefault("wordpress", {})
    return config_data

def main():
    # Load YAML configuration
    config_data = load_config("config.yaml")

    try:
        builder = WordpressResourceBuilder(config_data)
    except Exception as e:
        pulumi.log.error(f"Failed to initialize WordpressResourceBuilder: {e}")
        raise

    try:
        builder.build()
    except Exception as e:
        pulumi.log.error(f"Failed during resource build: {e}")
        raise

    # Export named output bindings
    for name, value in builder.outputs.items():
        pulumi.export(name, value)

if __name__ == "__main__":
    main()
