"""Connection context lookups for debug assembly."""
