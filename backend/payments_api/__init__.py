"""Tournament payments API: Square card payments for tournament entry fees."""
