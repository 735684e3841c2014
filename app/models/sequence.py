from tortoise import fields, models
import uuid


class OrderNumberSequence(models.Model):
    """
    Per-outlet order number counter. The row is locked (SELECT ... FOR UPDATE)
    and incremented in its own transaction, so every instance of the service
    shares one source of truth and numbers are never handed out twice.
    """
    id = fields.UUIDField(primary_key=True, default=uuid.uuid4)
    outlet = fields.OneToOneField("models.Outlet", related_name="order_number_sequence")
    last_value = fields.IntField(default=0) # Last number handed out; 0 means none yet
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "order_number_sequences"
