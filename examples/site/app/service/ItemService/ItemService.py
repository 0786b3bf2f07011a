from wren import RestService

ITEMS = {"7": {"id": 7, "title": "Seven"}}


class ItemService(RestService):
    allowed_methods = ("GET", "POST")

    def get(self, item_id=None):
        if item_id is None:
            return list(ITEMS.values())
        return ITEMS.get(item_id, {}), 200 if item_id in ITEMS else 404

    async def post(self):
        data = await self.request.json()
        return {"created": data}, 201
