"""DEX trading console: order input session and gateway client."""
