"""Low level content line reconstruction and field parsing."""
