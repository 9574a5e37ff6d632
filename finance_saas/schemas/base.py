from marshmallow import Schema, EXCLUDE, pre_load


class BaseSchema(Schema):
    """
    Request schema base.

    Unknown keys are dropped. ``aliases`` maps alternative input keys
    (camelCase sent by the frontend) onto the canonical snake_case field.
    """
    aliases = {}

    class Meta:
        unknown = EXCLUDE

    @pre_load
    def apply_aliases(self, data, **kwargs):
        if not isinstance(data, dict) or not self.aliases:
            return data
        data = dict(data)
        for alias, field_name in self.aliases.items():
            if alias in data and field_name not in data:
                data[field_name] = data.pop(alias)
        return data
