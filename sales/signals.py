from django.dispatch import Signal

# Sent once a checkout has been committed. Arguments: sale
sale_completed = Signal()
