"""Send the Song - anonymous YouTube song sharing."""
