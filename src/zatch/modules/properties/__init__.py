"""Property listings: back-office management and the public catalogue."""
