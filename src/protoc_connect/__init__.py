"""protoc plugin generating Connect Go bindings for protobuf services."""

__version__ = "0.1.0"
