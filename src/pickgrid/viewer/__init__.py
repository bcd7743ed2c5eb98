"""Optional PyQt6 widgets rendering pickgrid engine output."""
