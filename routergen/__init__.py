"""Generate a tRPC router layer from a pre-parsed Prisma data model."""

__version__ = "0.1.0"
