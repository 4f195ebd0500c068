"""Generates the nice-grpc API for the Arduino CLI."""
