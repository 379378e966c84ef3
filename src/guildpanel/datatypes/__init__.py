"""Plain data types shared by the API, service and repository layers."""
