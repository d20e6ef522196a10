"""User provisioning collaborator client."""
