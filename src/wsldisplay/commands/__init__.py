"""Click glue for the wsldisplay command."""
