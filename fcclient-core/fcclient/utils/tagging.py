from typing import Dict, List, Optional


class TaggingService:
    """
    Keeps the tag sets of resources, keyed by resource ARN.
    """

    tags: Dict[str, Dict[str, str]]

    def __init__(self):
        self.tags = {}

    def list_tags_for_resource(self, arn: str) -> Dict[str, str]:
        return dict(self.tags.get(arn, {}))

    def tag_resource(self, arn: str, tags: Optional[Dict[str, str]]):
        if not tags:
            return
        if arn not in self.tags:
            self.tags[arn] = {}
        self.tags[arn].update(tags)

    def untag_resource(self, arn: str, tag_names: List[str]):
        tags = self.tags.get(arn, {})
        for name in tag_names:
            tags.pop(name, None)

    def del_resource(self, arn: str):
        if arn in self.tags:
            del self.tags[arn]

    def matches(self, arn: str, query: Optional[Dict[str, str]]) -> bool:
        """
        Whether the tag set of the given resource contains every key/value pair of the query. An empty or missing
        query matches every resource.

        :param arn: the resource ARN
        :param query: the tags to match
        :return: True if all the query tags are set on the resource with the same value
        """
        if not query:
            return True
        tags = self.tags.get(arn, {})
        return all(key in tags and tags[key] == value for key, value in query.items())
